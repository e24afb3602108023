"""
Fee calculation, fee slips and the per-route summary report.
"""
import logging
from datetime import datetime

from config import BASE_FARE, SHORT_ROUTE_KM, SHORT_ROUTE_FACTOR
from exceptions import RecordNotFoundError
from persistence import append_receipt

logger = logging.getLogger(__name__)

SLIP_RULE = '-' * 31


def calculate_fee(student, routes):
    """
    Fee for a student on their assigned route.
    A student whose route does not exist pays nothing.
    """
    route = routes.get_by_id(student.route_id)
    if route is None:
        return 0.0

    fee = BASE_FARE + route.distance_km * route.rate_per_km
    if route.distance_km < SHORT_ROUTE_KM:
        fee *= SHORT_ROUTE_FACTOR
    return fee


def format_fee_slip(student, route, amount, issued_at=None):
    """Render one receipt block"""
    if issued_at is None:
        issued_at = datetime.now()

    return (
        f"{SLIP_RULE}\n"
        f"Date: {issued_at.ctime()}\n"
        f"Student ID: {student.id}\n"
        f"Name: {student.name}\n"
        f"Route: {route.name} (ID {route.id})\n"
        f"Distance: {route.distance_km:.2f} km | Rate: {route.rate_per_km:.2f} | Amount: {amount:.2f}\n"
        f"{SLIP_RULE}\n"
        "\n"
    )


def generate_fee_slip(student, routes, receipts_file, issued_at=None):
    """Append a fee slip for student to the receipt log and return its text"""
    route = routes.get_by_id(student.route_id)
    if route is None:
        raise RecordNotFoundError(f"Route {student.route_id} for student {student.id} not found")

    amount = calculate_fee(student, routes)
    slip = format_fee_slip(student, route, amount, issued_at)
    append_receipt(slip, receipts_file)

    logger.info(f"Fee slip for student {student.id} on route {route.id}: {amount:.2f}")
    return slip


def summarize_routes(students, routes):
    """Student count and fee revenue for every route, in route order"""
    summary = []
    for route in routes:
        assigned = [student for student in students if student.route_id == route.id]
        summary.append({
            'route': route,
            'student_count': len(assigned),
            'revenue': sum((calculate_fee(student, routes) for student in assigned), 0.0)
        })
    return summary
