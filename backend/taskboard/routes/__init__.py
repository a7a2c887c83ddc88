# Routes package init
"""
TaskBoard Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.
How:   One module per resource; every handler resolves the acting user from
       the X-User-ID header (taskboard.auth) and delegates to a service.

Route Inventory:
    - users.py:       POST /api/users, GET /api/users/me
    - boards.py:      /api/boards, board moves, reorder and rebalance
    - lists.py:       lists of a board, list moves
    - cards.py:       cards of a list, card detail, cross-list moves
    - labels.py:      board labels, attach/detach on cards
    - checklists.py:  checklists and their items
    - health.py:      GET /health

Routes stay THIN: extract path/body values, call the service, return the
schema it produced. Ordering and ownership rules live in the services.
"""
