# TV Catalog API
"""
Read-only REST API over the TV show catalog.

Endpoints:
- GET /api/v1/actors - Keyset-paginated actors
- GET /api/v1/shows - Keyset-paginated shows
- GET /api/v1/shows/{id}/seasons|episodes|characters - Per-show lists
- GET /api/v1/seasons/{id}/episodes - Episodes of a season
- GET /api/v1/episodes/{id}/characters - Characters in an episode
"""
