"""
High-level use cases for the Foojra API.

Each service module orchestrates the collection stores to implement business
rules (signup, login, token issuance). Routers call these services instead of
manipulating the JSON files or tokens directly.
"""
