"""
Клиент администраторской панели маркетплейса приложений.
"""
