"""
Routes package for the travel explorer API
Blueprint-based modular route organization
"""


def register_blueprints(app):
    """
    Register all route blueprints with the Quart app

    Admin (health) first, then the content endpoints.
    """
    from .admin import register as register_admin
    from .places import register as register_places
    from .content import register as register_content
    from .guide import register as register_guide
    from .weather import register as register_weather
    from .destination import register as register_destination

    register_admin(app)
    register_places(app)
    register_content(app)
    register_guide(app)
    register_weather(app)
    register_destination(app)
