"""
HTTP Basic credential gate for mutating routes.
"""
