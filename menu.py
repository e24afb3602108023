"""
Interactive console menu for the bus fee manager.
Reads one selection per iteration and dispatches to the stores, billing and persistence.
"""
import logging

from billing import calculate_fee, generate_fee_slip, summarize_routes
from exceptions import BusManagerError
from forms import (RouteForm, StudentForm, RecordIdForm, MenuForm, bind_form, format_errors)

logger = logging.getLogger(__name__)

BANNER = "===== College Bus Fee & Route Manager ====="
MENU_TEXT = (
    "1. Show routes\n2. Add route\n3. Remove route\n"
    "4. Show students\n5. Add student\n6. Remove student\n"
    "7. Generate fee slip for student\n8. Print summary\n"
    "9. Save data\n0. Exit"
)
EXIT_CHOICE = 0


class Menu:
    def __init__(self, session, pause=True):
        self.session = session
        self.pause = pause
        self.actions = {
            1: self.show_routes,
            2: self.add_route,
            3: self.remove_route,
            4: self.show_students,
            5: self.add_student,
            6: self.remove_student,
            7: self.fee_slip,
            8: self.print_summary,
            9: self.save_data,
        }

    def pause_console(self):
        if self.pause:
            input("\nPress Enter to continue...")

    def read_choice(self):
        print(f"\n{BANNER}")
        print(MENU_TEXT)
        form = bind_form(MenuForm, choice=input("Choose: "))
        if not form.validate():
            return None
        return form.choice.data

    def run(self):
        """Loop until the user exits; returns the process exit status"""
        while True:
            try:
                choice = self.read_choice()
                if choice == EXIT_CHOICE:
                    break

                action = self.actions.get(choice)
                if action is None:
                    print("Invalid input.")
                else:
                    try:
                        action()
                    except BusManagerError as e:
                        logger.warning(f"{action.__name__} failed: {e}")
                        print(f"Error: {e}")
                self.pause_console()
            except EOFError:
                break

        self.exit()
        return 0

    def exit(self):
        try:
            self.session.save()
        except BusManagerError as e:
            logger.warning(f"Save on exit failed: {e}")
            print(f"Save failed: {e}")
        print("Goodbye.")

    # Routes

    def show_routes(self):
        print("\nAvailable routes:")
        routes = self.session.routes.list_all()
        if not routes:
            print("(none)")
            return
        for route in routes:
            print(f"ID: {route.id} | {route.name} | Distance: {route.distance_km:.2f} km | "
                  f"Rate: {route.rate_per_km:.2f} per km")

    def add_route(self):
        form = bind_form(RouteForm,
                         name=input("Route name: "),
                         distance_km=input("Distance (km): "),
                         rate_per_km=input("Rate per km: "))
        if not form.validate():
            print(f"Invalid input. {format_errors(form)}")
            return

        route_id = self.session.routes.add_route(form.name.data, form.distance_km.data, form.rate_per_km.data)
        print(f"Added route with ID {route_id}")

    def remove_route(self):
        self._remove(self.session.routes, "Route", "Route ID to remove: ")

    # Students

    def show_students(self):
        print("\nStudents:")
        students = self.session.students.list_all()
        if not students:
            print("(none)")
            return
        for student in students:
            print(f"ID: {student.id} | {student.name} | Route ID: {student.route_id}")

    def add_student(self):
        name = input("Student name: ")
        self.show_routes()
        form = bind_form(StudentForm, name=name, route_id=input("Assign route ID (0 for none): "))
        if not form.validate():
            print(f"Invalid input. {format_errors(form)}")
            return

        student_id = self.session.students.add_student(form.name.data, form.route_id.data)
        print(f"Added student with ID {student_id}")

    def remove_student(self):
        self._remove(self.session.students, "Student", "Student ID to remove: ")

    def _remove(self, store, label, prompt):
        form = bind_form(RecordIdForm, record_id=input(prompt))
        if not form.validate():
            print(f"Invalid input. {format_errors(form)}")
            return

        record_id = form.record_id.data
        if store.remove_by_id(record_id):
            print("Removed.")
        else:
            print(f"{label} {record_id} not found.")

    # Billing

    def fee_slip(self):
        form = bind_form(RecordIdForm, record_id=input("Student ID: "))
        if not form.validate():
            print(f"Invalid input. {format_errors(form)}")
            return

        student = self.session.students.get_by_id(form.record_id.data)
        if student is None:
            print("Student not found.")
            return

        amount = calculate_fee(student, self.session.routes)
        print(f"Fee for {student.name} (ID {student.id}): {amount:.2f}")
        try:
            generate_fee_slip(student, self.session.routes, self.session.receipts_file)
        except BusManagerError as e:
            logger.warning(f"Fee slip for student {student.id} not written: {e}")
            print(f"Failed to write fee slip: {e}")
            return
        print(f"Fee slip appended to {self.session.receipts_file}")

    def print_summary(self):
        print("\nSummary report:")
        summary = summarize_routes(self.session.students, self.session.routes)
        if not summary:
            print("No routes.")
            return
        for entry in summary:
            route = entry['route']
            print(f"Route {route.name} (ID {route.id}): {entry['student_count']} students | "
                  f"Revenue: {entry['revenue']:.2f}")

    # Persistence

    def save_data(self):
        try:
            self.session.save()
        except BusManagerError as e:
            logger.warning(f"Save failed: {e}")
            print(f"Save failed: {e}")
            return
        print("Saved.")
