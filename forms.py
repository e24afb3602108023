"""
Input forms for the console menu.
Raw answers typed at the prompts are validated with WTForms before any store is touched.
"""
import math
from functools import partial

from werkzeug.datastructures import MultiDict
from wtforms import Form, StringField, FloatField, IntegerField
from wtforms.validators import DataRequired, InputRequired, NumberRange, ValidationError

from config import MAX_ROUTE_NAME, MAX_STUDENT_NAME, MAX_RECORD_ID
from data_store import truncate_name


def finite_number(form, field):
    if field.data is not None and not math.isfinite(field.data):
        raise ValidationError('Must be a finite number.')


class RouteForm(Form):
    name = StringField('Route name', filters=[partial(truncate_name, limit=MAX_ROUTE_NAME)],
                       validators=[DataRequired()])
    distance_km = FloatField('Distance (km)', validators=[InputRequired(), finite_number, NumberRange(min=0)])
    rate_per_km = FloatField('Rate per km', validators=[InputRequired(), finite_number, NumberRange(min=0)])


class StudentForm(Form):
    name = StringField('Student name', filters=[partial(truncate_name, limit=MAX_STUDENT_NAME)],
                       validators=[DataRequired()])
    # 0 means no route; ids of routes that do not exist are accepted
    route_id = IntegerField('Route ID', validators=[InputRequired(), NumberRange(min=0, max=MAX_RECORD_ID)])


class RecordIdForm(Form):
    record_id = IntegerField('ID', validators=[InputRequired()])


class MenuForm(Form):
    choice = IntegerField('Choice', validators=[InputRequired()])


def bind_form(form_class, **answers):
    """Build a form from raw console answers keyed by field name"""
    return form_class(MultiDict(answers))


def format_errors(form):
    """One line describing every validation error on a form"""
    messages = []
    for name, errors in form.errors.items():
        messages.append(f"{form[name].label.text}: {' '.join(errors)}")
    return '; '.join(messages)
