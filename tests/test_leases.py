import io
import os
from datetime import date, timedelta

import pytest

from models import db, Room, Lease, LeaseDocument, Payment


def lease_form(central_park, room='102B', **overrides):
    today = date.today()
    data = {
        'tenant_id': str(central_park.tenant_id),
        'room_id': str(central_park.room_ids[room]),
        'start_date': today.isoformat(),
        'end_date': (today + timedelta(days=365)).isoformat(),
        'rent_amount': '1200',
        'deposit_paid': '1200',
    }
    data.update(overrides)
    return data


def room_status(app, room_id):
    with app.app_context():
        return db.session.get(Room, room_id).status


def test_creating_lease_occupies_room(app, agent, central_park):
    response = agent.post('/agent/leases/', data=lease_form(central_park))

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/agent/leases/')
    assert room_status(app, central_park.room_ids['102B']) == 'occupied'
    with app.app_context():
        assert Lease.query.count() == 2


def test_leasing_an_occupied_room_is_conflict(app, agent, central_park):
    response = agent.post('/agent/leases/', data=lease_form(central_park, room='101A'))

    assert response.status_code == 409
    assert b'already occupied' in response.data
    with app.app_context():
        assert Lease.query.count() == 1


@pytest.mark.parametrize('overrides,message', [
    ({'end_date': '2000-01-01'}, b'End date must be on or after the start date.'),
    ({'start_date': 'next week'}, b'Start date must be a date'),
    ({'rent_amount': 'lots'}, b'Rent amount must be a number.'),
    ({'tenant_id': '9999'}, b'Unknown tenant.'),
    ({'tenant_id': ''}, b'Tenant is required.'),
])
def test_invalid_lease_input_is_rejected(app, agent, central_park, overrides, message):
    response = agent.post('/agent/leases/', data=lease_form(central_park, **overrides))

    assert response.status_code == 400
    assert message in response.data
    assert room_status(app, central_park.room_ids['102B']) == 'vacant'


def test_unknown_room_is_bad_request(agent, central_park):
    response = agent.post('/agent/leases/', data=lease_form(central_park, room_id='9999'))
    assert response.status_code == 400


def test_deleting_lease_frees_room_and_drops_it_from_list(app, agent, central_park):
    response = agent.post(f'/agent/leases/{central_park.lease_id}/delete')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/agent/leases/')
    assert room_status(app, central_park.room_ids['101A']) == 'vacant'
    with app.app_context():
        assert db.session.get(Lease, central_park.lease_id) is None
        assert Payment.query.count() == 0

    listing = agent.get('/agent/leases/')
    assert listing.status_code == 200
    assert b'John Doe' not in listing.data


def test_lease_views(agent, central_park):
    assert agent.get('/agent/leases/').status_code == 200
    assert agent.get('/agent/leases/new').status_code == 200
    view = agent.get(f'/agent/leases/{central_park.lease_id}')
    assert view.status_code == 200
    assert b'John Doe' in view.data
    assert agent.get(f'/agent/leases/{central_park.lease_id}/edit').status_code == 200
    assert agent.get('/agent/leases/9999').status_code == 404


def test_moving_lease_to_another_room_swaps_statuses(app, agent, central_park):
    response = agent.post(f'/agent/leases/{central_park.lease_id}/edit',
                          data=lease_form(central_park, room='102B', rent_amount='1250'))

    assert response.status_code == 302
    assert room_status(app, central_park.room_ids['101A']) == 'vacant'
    assert room_status(app, central_park.room_ids['102B']) == 'occupied'
    with app.app_context():
        assert db.session.get(Lease, central_park.lease_id).rent_amount == 1250


class TestLeaseDocuments:

    def upload(self, agent, central_park, filename='contract.pdf', content=b'%PDF-1.4 lease'):
        data = lease_form(central_park)
        data.update({
            'documents': (io.BytesIO(content), filename),
            'document_types': 'contract',
            'document_descriptions': 'Signed contract',
        })
        return agent.post('/agent/leases/', data=data, content_type='multipart/form-data')

    def stored_document(self, app):
        with app.app_context():
            doc = LeaseDocument.query.one()
            return doc.id, doc.lease_id, os.path.join(app.config['UPLOAD_FOLDER'], doc.file_path)

    def test_upload_stores_file_under_generated_name(self, app, agent, central_park):
        assert self.upload(agent, central_park).status_code == 302

        with app.app_context():
            doc = LeaseDocument.query.one()
            assert doc.file_name == 'contract.pdf'
            assert doc.document_type == 'contract'
            assert doc.description == 'Signed contract'
            assert doc.file_path.startswith('leases/')
            assert doc.file_path.endswith('.pdf')
            assert doc.file_path != 'leases/contract.pdf'
        _, _, path = self.stored_document(app)
        assert os.path.exists(path)

    def test_non_ascii_name_keeps_its_extension(self, app, agent, central_park):
        assert self.upload(agent, central_park, filename='договор.pdf').status_code == 302

        with app.app_context():
            doc = LeaseDocument.query.one()
            assert doc.file_name == 'договор.pdf'
            assert doc.file_path.endswith('.pdf')

    def test_download_uses_original_name(self, app, agent, central_park):
        self.upload(agent, central_park)
        doc_id, lease_id, _ = self.stored_document(app)

        response = agent.get(f'/agent/leases/{lease_id}/documents/{doc_id}')
        assert response.status_code == 200
        assert response.data == b'%PDF-1.4 lease'
        assert 'contract.pdf' in response.headers['Content-Disposition']
        response.close()

    def test_document_of_another_lease_is_not_found(self, app, agent, central_park):
        self.upload(agent, central_park)
        doc_id, _, _ = self.stored_document(app)
        response = agent.get(f'/agent/leases/{central_park.lease_id}/documents/{doc_id}')
        assert response.status_code == 404

    def test_disallowed_type_is_rejected_before_anything_is_saved(self, app, agent, central_park):
        response = self.upload(agent, central_park, filename='payload.exe')

        assert response.status_code == 400
        assert b'File type not allowed' in response.data
        assert room_status(app, central_park.room_ids['102B']) == 'vacant'
        with app.app_context():
            assert LeaseDocument.query.count() == 0
            assert Lease.query.count() == 1

    def test_oversized_file_is_rejected(self, app, agent, central_park):
        app.config['LEASE_DOCUMENT_MAX_BYTES'] = 10
        response = self.upload(agent, central_park, content=b'x' * 11)
        assert response.status_code == 400
        assert b'File too large' in response.data

    def test_delete_document_removes_file_and_row(self, app, agent, central_park):
        self.upload(agent, central_park)
        doc_id, lease_id, path = self.stored_document(app)

        response = agent.post(f'/agent/leases/{lease_id}/documents/{doc_id}/delete')

        assert response.status_code == 302
        assert response.headers['Location'].endswith(f'/agent/leases/{lease_id}')
        assert not os.path.exists(path)
        with app.app_context():
            assert LeaseDocument.query.count() == 0

    def test_delete_document_with_missing_file_still_deletes_row(self, app, agent, central_park):
        self.upload(agent, central_park)
        doc_id, lease_id, path = self.stored_document(app)
        os.remove(path)

        response = agent.post(f'/agent/leases/{lease_id}/documents/{doc_id}/delete')

        assert response.status_code == 302
        with app.app_context():
            assert db.session.get(LeaseDocument, doc_id) is None

    def test_deleting_lease_removes_its_files(self, app, agent, central_park):
        self.upload(agent, central_park)
        _, lease_id, path = self.stored_document(app)

        assert agent.post(f'/agent/leases/{lease_id}/delete').status_code == 302
        assert not os.path.exists(path)
        with app.app_context():
            assert LeaseDocument.query.count() == 0
