"""
Configuration for the college bus fee and route manager.
All file locations are relative to the working directory the program is started from.
"""

# Data files
DATA_DIR = 'data'
ROUTES_FILENAME = 'routes.dat'
STUDENTS_FILENAME = 'students.dat'
RECEIPTS_FILENAME = 'receipts.txt'
LOG_FILENAME = 'bus_manager.log'

# Name limits (characters kept after truncation)
MAX_ROUTE_NAME = 63
MAX_STUDENT_NAME = 63

# Ids are persisted as signed 32-bit integers
MAX_RECORD_ID = 2**31 - 1

# Fee policy
BASE_FARE = 50.0
SHORT_ROUTE_KM = 5.0        # routes shorter than this get the discount
SHORT_ROUTE_FACTOR = 0.95   # 5% off

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
