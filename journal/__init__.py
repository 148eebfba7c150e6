"""
Журнал посещаемости группы поверх Google Sheets
"""
