"""Business logic: ticket persistence, authentication and the client-side core.

Handlers load services lazily so importing a handler never opens a database
or AWS connection.
"""
