"""HTML view of the weather panel.

Renders the in-memory surface into a Jinja2 page and turns the search form
into a panel submission.
"""
