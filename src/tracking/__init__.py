"""
Tracking bounded context
Food, insulin, exercise, and note events logged by a user
"""
