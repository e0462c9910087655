from bookclub.routes.meetings import register_meeting_routes
from bookclub.routes.rankings import register_ranking_routes
from bookclub.routes.themes import register_theme_routes


def register_routes(app):
    register_meeting_routes(app)
    register_ranking_routes(app)
    register_theme_routes(app)
