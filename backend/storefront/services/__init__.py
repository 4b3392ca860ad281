# Services package init
"""
Storefront Backend — Services Layer
=====================================

Service Inventory:
    - ProductService: product CRUD, listing and search query translation
    - OrderService:   order listing, creation with computed totals, deletion
    - UploadService:  upload storage and lookup on the local filesystem

Services receive their DocumentStore (or directory) in the constructor and
can be unit-tested against temporary files without HTTP.
"""
