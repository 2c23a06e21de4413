"""
Recipes and their ratings: schemas, SQL, business logic and routes.
"""
