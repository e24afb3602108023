"""
Record types for the bus fee manager.
Routes and students are plain in-memory records owned by their stores.
"""


class Route:
    """A bus route with the distance and per-km rate used for billing"""

    def __init__(self, id, name, distance_km, rate_per_km):
        self.id = id
        self.name = name
        self.distance_km = float(distance_km)
        self.rate_per_km = float(rate_per_km)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'distance_km': self.distance_km,
            'rate_per_km': self.rate_per_km
        }

    def __eq__(self, other):
        if not isinstance(other, Route):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'<Route {self.id} {self.name!r}>'


class Student:
    """A student, optionally assigned to one route (route_id 0 means none)"""

    def __init__(self, id, name, route_id=0):
        self.id = id
        self.name = name
        self.route_id = route_id

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'route_id': self.route_id
        }

    def __eq__(self, other):
        if not isinstance(other, Student):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'<Student {self.id} {self.name!r}>'
