import pytest

from models import Property


@pytest.mark.parametrize('url', [
    '/agent/dashboard/',
    '/agent/properties/',
    '/agent/tenants/',
    '/agent/leases/',
    '/agent/payments/',
    '/agent/maintenance/',
    '/agent/contacts/',
    '/agent/reports/',
    '/agent/reports/export/payments',
])
def test_agent_pages_redirect_anonymous_users_to_login(client, url):
    response = client.get(url)
    assert response.status_code == 302
    assert '/login' in response.headers['Location']


def test_anonymous_post_is_not_dispatched(client, app):
    response = client.post('/agent/properties/', data={'name': 'Nope'})
    assert response.status_code == 302

    with app.app_context():
        assert Property.query.count() == 0


def test_root_redirects_to_login(client):
    response = client.get('/')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/login')


def test_register_logs_in(agent):
    assert agent.get('/agent/dashboard/').status_code == 200


def test_duplicate_registration_is_conflict(agent):
    agent.get('/logout')
    response = agent.post('/register', data={'email': 'agent@example.com', 'password': 'x'})
    assert response.status_code == 409
    assert b'Email already exists.' in response.data


def test_register_requires_email(client):
    assert client.post('/register', data={'password': 'x'}).status_code == 400


def test_login_and_logout(agent):
    agent.get('/logout')
    assert agent.get('/agent/tenants/').status_code == 302

    response = agent.post('/login', data={'email': 'agent@example.com', 'password': 'secret'})
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/agent/dashboard/')
    assert agent.get('/agent/tenants/').status_code == 200


def test_wrong_password_rerenders_login(agent):
    agent.get('/logout')
    response = agent.post('/login', data={'email': 'agent@example.com', 'password': 'wrong'})
    assert response.status_code == 200
    assert b'Invalid email or password' in response.data
    assert agent.get('/agent/tenants/').status_code == 302


def test_legacy_dashboard_redirect(agent):
    response = agent.get('/dashboard')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/agent/dashboard/')
