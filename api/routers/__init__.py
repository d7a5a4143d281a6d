"""
API Routers - Organized endpoint handlers for the Camp Portal API.

Each router handles a specific domain:
- auth: Administrator sign-up, sign-in, sign-out and role lookup
- rooms: Room management and occupancy (admin only)
- registrations: Public submission and admin review
"""
