"""Scheduling domain - the calendar and drag-and-drop rescheduling"""
