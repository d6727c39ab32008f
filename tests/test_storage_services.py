from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError

from signoff.services.storage import StorageService


def _configure(mock_settings):
    mock_settings.r2_endpoint = "https://account.r2.cloudflarestorage.com"
    mock_settings.r2_access_key_id = "test-key"
    mock_settings.r2_secret_access_key = "test-secret"
    mock_settings.r2_bucket = "signoff-media"
    mock_settings.r2_public_base_url = "https://media.example.com/"


class TestStorageService:
    def test_is_configured_false_by_default(self):
        assert StorageService.is_configured() is False

    @patch("signoff.services.storage.settings")
    def test_is_configured_true(self, mock_settings):
        _configure(mock_settings)
        assert StorageService.is_configured() is True

    @patch("signoff.services.storage.settings")
    def test_extract_key(self, mock_settings):
        _configure(mock_settings)
        assert StorageService.extract_key("https://media.example.com/evt/a.gif") == "evt/a.gif"
        assert StorageService.extract_key("https://elsewhere.test/evt/a.gif") is None
        assert StorageService.extract_key(None) is None

    @patch("signoff.services.storage.boto3")
    @patch("signoff.services.storage.settings")
    def test_delete_media(self, mock_settings, mock_boto3):
        _configure(mock_settings)
        mock_client = MagicMock()
        mock_boto3.client.return_value = mock_client

        assert StorageService.delete_media("https://media.example.com/evt/a.gif") is True
        mock_client.delete_object.assert_called_once_with(
            Bucket="signoff-media", Key="evt/a.gif"
        )

    @patch("signoff.services.storage.boto3")
    @patch("signoff.services.storage.settings")
    def test_delete_media_outside_bucket_is_skipped(self, mock_settings, mock_boto3):
        _configure(mock_settings)
        assert StorageService.delete_media("data:image/gif;base64,AAAA") is False
        mock_boto3.client.assert_not_called()

    @patch("signoff.services.storage.boto3")
    @patch("signoff.services.storage.settings")
    def test_delete_media_failure_is_swallowed(self, mock_settings, mock_boto3):
        _configure(mock_settings)
        mock_client = MagicMock()
        mock_client.delete_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject"
        )
        mock_boto3.client.return_value = mock_client

        assert StorageService.delete_media("https://media.example.com/evt/a.gif") is False
