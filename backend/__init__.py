"""
FastAPI бэкенд журнала посещаемости
"""
