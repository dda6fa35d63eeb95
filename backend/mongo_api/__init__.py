"""
Mongo API — Application Package
================================

HTTP CRUD service for user records and GridFS image storage on MongoDB.

    ┌─────────────────────────────────────┐
    │      Routes (users, images)         │  ← HTTP decoding/encoding only
    ├─────────────────────────────────────┤
    │   Stores (UserStore, ImageStore)    │  ← one driver call per operation
    ├─────────────────────────────────────┤
    │     Models (RecordId, User, Image)  │  ← domain values
    ├─────────────────────────────────────┤
    │   Database (Motor client, GridFS)   │  ← connection lifecycle
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
