# Routes package init
"""
Storefront Backend — API Routes Package
=========================================

Route Inventory:
    - products.py: /product           list, search, get, create, update, delete
    - orders.py:   /orders            list, get, create, delete
    - upload.py:   /upload/file       multipart upload
                   /upload/uploads/{filename}  download
    - health.py:   /health            store and upload directory probe

Routes stay thin: they read parameters, call a service obtained through
storefront.dependencies, and set status codes and headers.
"""
