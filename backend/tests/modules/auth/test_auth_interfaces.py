from modules.auth.interfaces import IAuthService, ISmsSender
from modules.auth.service import AuthService
from modules.auth.sms import LoggingSmsSender


class TestAuthInterface:
    def test_interface_methods_exist(self):
        """IAuthService should define the five auth operations."""
        methods = ["register_by_email", "login_by_email", "mobile_auth", "verify_otp", "refresh_session"]
        for method in methods:
            assert hasattr(IAuthService, method)

    def test_auth_service_has_interface_methods(self):
        for method in ["register_by_email", "login_by_email", "mobile_auth", "verify_otp", "refresh_session"]:
            assert callable(getattr(AuthService, method))

    def test_service_instance_satisfies_protocol(self, auth_service):
        assert isinstance(auth_service, IAuthService)

    def test_sms_senders_satisfy_protocol(self, sms):
        assert isinstance(sms, ISmsSender)
        assert isinstance(LoggingSmsSender(), ISmsSender)
