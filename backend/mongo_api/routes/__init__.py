# Routes package init
"""
Mongo API — Routes Package
===========================

Route Inventory:
    - users.py:   POST   /users            (create user, returns hex id)
                  GET    /users/all        (stream all users as JSON array)
                  GET    /users/{id}       (get one user)
                  DELETE /users/{id}       (delete one user)
    - images.py:  POST   /image            (upload base64 image)
                  GET    /image/{id}       (download stored image)
    - health.py:  GET    /health           (MongoDB ping)

Routes are thin: decode input, await one store call, encode output.
"""
