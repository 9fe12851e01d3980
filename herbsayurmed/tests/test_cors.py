from django.test import SimpleTestCase, override_settings


@override_settings(CORS_ALLOWED_ORIGINS=['https://herbsayurmed.com'])
class CorsTests(SimpleTestCase):
    def test_storefront_origin_allowed(self):
        response = self.client.get('/get-razorpay-key', HTTP_ORIGIN='https://herbsayurmed.com')
        self.assertEqual(response['Access-Control-Allow-Origin'], 'https://herbsayurmed.com')
        self.assertEqual(response['Access-Control-Allow-Credentials'], 'true')

    def test_unknown_origin_not_allowed(self):
        response = self.client.get('/get-razorpay-key', HTTP_ORIGIN='https://evil.example')
        self.assertNotIn('Access-Control-Allow-Origin', response)
