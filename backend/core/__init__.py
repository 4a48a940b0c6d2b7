"""
Shared pieces for the Agromet data manager API.

This app contains:
- The JSON envelope helpers every view returns (`{"success": ..., ...}`).
- Limit/offset pagination and query-string parsing helpers.
- The project-wide DRF exception handler.
- Health check and login endpoints.
"""
