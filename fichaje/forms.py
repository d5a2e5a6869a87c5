"""WTForms form classes."""

from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import DateField
from wtforms.validators import DataRequired, ValidationError


MAX_RANGE_DAYS = 366


class AttendanceRangeForm(FlaskForm):
    class Meta:
        csrf = False

    date_from = DateField("From", validators=[DataRequired()])
    date_to = DateField("To", validators=[DataRequired()])

    def validate_date_to(self, field: DateField) -> None:
        if not self.date_from.data or not field.data:
            return
        if field.data < self.date_from.data:
            raise ValidationError("End date must be on or after start date.")
        if (field.data - self.date_from.data).days >= MAX_RANGE_DAYS:
            raise ValidationError(f"Date range cannot exceed {MAX_RANGE_DAYS} days.")
