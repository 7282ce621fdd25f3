"""
Domain layer for the send-email endpoint.

This layer contains:
- Data models (type-safe structures)
- Request parsing and validation
- Response construction
- The request pipeline (dispatch, guards, outcome mapping)
"""
