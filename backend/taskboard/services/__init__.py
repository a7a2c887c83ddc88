# Services package init
"""
TaskBoard Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services accept an AsyncSession, the acting user and validated
       request schemas, and return response schemas. Routes stay thin.

Service Inventory:
    Ordering core (no database access):
    - order_keys:          key arithmetic (fractional and integer strategies)
    - rebalancer:          evenly respaces a whole scope
    - positioning_service: append / insert / move / reorder on snapshots

    Persistence glue:
    - scope_lock:          per-scope critical sections and transaction retry
    - scope_snapshot:      ORM rows ⇄ [(id, key)] snapshots
    - ownership_service:   loads targets through Board.user_id or raises 404

    Resources:
    - user_service, board_service, list_service, card_service,
      label_service, checklist_service
"""
