# Services package init
"""
Gist Relay — Services Layer
============================

What:  The upstream client sitting between routes (HTTP) and GitHub.

Service Inventory:
    - GistService (abstract): fetch_raw() + create_gist()
    - GitHubGistService: Concrete implementation over httpx

Routes only see GistService, so tests swap in a fake without network access.
"""
