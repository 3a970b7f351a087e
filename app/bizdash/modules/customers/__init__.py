"""
Customers module.

Scope:
- Customers CRUD over a JSON API (list + create + detail + partial update + delete)
- Validation contracts for create / update / list-filter requests
- Email is the customer's unique identity (trimmed, lower-cased)
"""
