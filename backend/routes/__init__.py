"""
Роуты API
"""
