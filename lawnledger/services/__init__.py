"""Cross-cutting services - gateway, stores, saga, drag state and notifications"""
