from django.test import SimpleTestCase


class HealthCheckTests(SimpleTestCase):
    def test_root_reports_running(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['status'], 'Server is running')
        self.assertTrue(body['timestamp'].endswith('Z'))

    def test_root_is_get_only(self):
        response = self.client.post('/')
        self.assertEqual(response.status_code, 405)
