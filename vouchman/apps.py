from django.apps import AppConfig


class VouchmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "vouchman"
    verbose_name = "Vouchman - Proof-of-Presence Vouchers"

    signing_key = None
    voucher_signer = None

    def ready(self):
        from vouchman.conf import vouchman_settings
        from vouchman.keys import load_signing_key
        from vouchman.signing import VoucherSigner

        # Fails startup with ImproperlyConfigured when the key is missing
        self.signing_key = load_signing_key()
        self.voucher_signer = VoucherSigner(
            self.signing_key,
            nonce_bytes=vouchman_settings.NONCE_BYTES,
        )
