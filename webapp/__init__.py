"""Web control panel"""
