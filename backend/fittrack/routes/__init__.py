# Routes package init
"""
FitTrack Backend — API Routes Package
=======================================

Route Inventory:
    - workouts.py: POST   /workouts            (create workout + entries)
                   GET    /workouts/{id}       (workout + ordered entries)
                   PUT    /workouts/{id}       (replace workout + entries)
                   DELETE /workouts/{id}       (delete workout + entries)
    - users.py:    POST   /users               (register)
                   GET    /users/{username}    (profile lookup)
                   PUT    /users/{id}          (profile update)
    - health.py:   GET    /health              (service health check)

Routes stay THIN: decode the request, call a store, encode the result.
"""
