"""Bookings domain - slot availability, reservations, derived booking status"""
