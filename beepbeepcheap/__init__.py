"""
BeepBeepCheap Price Comparison Core

Modules:
    models      - Data models (ExtractedProduct, ProductIdentity, SearchResult, ...)
    common      - Shared utilities (config loader, logging, price/text helpers)
    extraction  - Store resolution, page rendering and the field extraction cascade
    matching    - Product identity extraction and cross-store matching
    search      - Shopping-search provider adapters
    monitoring  - Sequential batch price checks
"""
