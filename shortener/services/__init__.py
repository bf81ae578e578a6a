"""
Services module for business logic separation.

- code_generator: random short codes
- link_store: persistence of links, with database errors translated
- link_service: create and resolve links on top of the store
"""
