import argparse
import logging

import uvicorn

from imgdrop.config import HOST, LOG_LEVEL, PORT, TOTP_ISSUER, TOTP_SECRET_FILE


def main(argv=None):
    parser = argparse.ArgumentParser(prog="imgdrop", description="TOTP-gated image upload server")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument(
        "--show-uri",
        action="store_true",
        help="print the otpauth:// provisioning URI and exit",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.show_uri:
        from imgdrop.secret_store import SecretStore, provisioning_uri

        secret = SecretStore(TOTP_SECRET_FILE).load_or_create()
        print(provisioning_uri(secret, TOTP_ISSUER))
        return

    # Imported here so the secret is provisioned before the socket is bound.
    from imgdrop.main import app

    uvicorn.run(app, host=args.host, port=args.port, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
