# Services package init
"""
Mongo API — Store Adapters
===========================

Service Inventory:
    - UserStore:  users collection (insert, find, delete, list, count)
    - ImageStore: GridFS bucket (upload, download, download by name)

Both adapters receive their driver object in the constructor; database.py
builds them once at startup from a single Motor client.
"""
