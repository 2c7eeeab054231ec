# app/__init__.py
"""
Paquete `app`: API del feed (posts, likes, comentarios).
"""
