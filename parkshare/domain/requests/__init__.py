"""Requests domain - owner change requests and the admin approval workflow"""
