"""LawnLedger - scheduling consistency and analytics for lawn-service businesses"""
