"""
Routers module - API endpoint handlers organized by feature.

- google_auth: Google Drive OAuth flow, connection status, logout
- callback: Results posted back by the n8n workflow
- webhook_proxy: Relay of JSON jobs to the n8n workflow
- projects: Project picker, generation form, history API
- pages: Dashboard and history HTML
"""
