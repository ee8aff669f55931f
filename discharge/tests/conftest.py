import datetime

import pytest

from discharge.models import Admission, Bed, Patient

from .helpers import as_staff, staff


@pytest.fixture
def doctor():
    return staff(11, 'doctor', 'Dr. Grey')


@pytest.fixture
def admin():
    return staff(21, 'admin', 'Billing Office')


@pytest.fixture
def nurse():
    return staff(31, 'nurse')


@pytest.fixture
def bed(db):
    return Bed.objects.create(ward='A', bed_number='A-1', status=Bed.STATUS_OCCUPIED)


@pytest.fixture
def patient(db):
    return Patient.objects.create(
        first_name='Ada', last_name='Lovelace', gender='female', date_of_birth=datetime.date(1980, 12, 10),
    )


@pytest.fixture
def admission(patient, bed):
    return Admission.objects.create(patient=patient, bed=bed, status=Admission.STATUS_ACTIVE)


@pytest.fixture
def doctor_client():
    return as_staff(11, 'Doctor', 'Dr. Grey')


@pytest.fixture
def admin_client():
    return as_staff(21, 'administrator')
