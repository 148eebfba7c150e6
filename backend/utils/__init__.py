"""
Утилиты бэкенда: авторизация, ошибки, доступ к таблице
"""
