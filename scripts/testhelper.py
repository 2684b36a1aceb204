#!/usr/bin/env python3
"""Testhelper CLI for cryptokits interoperability testing.

Reads a JSON request from stdin, runs one engine operation and prints the
result as JSON. Errors are printed as ``{"error": ..., "message": ...}``
with exit status 2.
"""

import json
import sys

from cryptokits import (
    AesRequest,
    CryptoKitsError,
    EciesRequest,
    KdfRequest,
    PkcsSpec,
    RsaRequest,
    aes_crypto,
    convert_encoding,
    ecies,
    generate_aes,
    generate_ecc,
    generate_edwards,
    generate_iv,
    generate_rsa,
    kdf,
    parse_ecc,
    parse_rsa,
    rsa_crypto,
    transfer_ecc_key,
    transfer_edwards_key,
    transfer_rsa_key,
)


def _key_tuple(keys) -> dict:
    return {"privateKey": keys.private_key, "publicKey": keys.public_key}


def _pkcs_spec(data: dict) -> PkcsSpec:
    return PkcsSpec(
        pkcs=data["pkcs"],
        format=data["format"],
        encoding=data.get("encoding"),
    )


def cmd_generate_rsa(data: dict) -> dict:
    """Generate an RSA key pair."""
    return _key_tuple(
        generate_rsa(
            data.get("keySize", 2048),
            data.get("pkcs", "pkcs8"),
            data.get("format", "pem"),
            data.get("encoding"),
        )
    )


def cmd_generate_ecc(data: dict) -> dict:
    """Generate an elliptic curve key pair."""
    return _key_tuple(
        generate_ecc(
            data["curve"],
            data.get("pkcs", "pkcs8"),
            data.get("format", "pem"),
            data.get("encoding"),
        )
    )


def cmd_generate_edwards(data: dict) -> dict:
    """Generate a Curve25519 key pair."""
    return _key_tuple(
        generate_edwards(data.get("pkcs", "pkcs8"), data.get("format", "pem"), data.get("encoding"))
    )


def cmd_transfer_key(data: dict) -> dict:
    """Convert a key between containers and serializations."""
    family = data["family"]
    source = _pkcs_spec(data["from"])
    target = _pkcs_spec(data["to"])
    is_public = data.get("isPublic", False)

    if family == "rsa":
        key = transfer_rsa_key(data["key"], source, target, is_public)
    elif family == "curve25519":
        key = transfer_edwards_key(data["key"], source, target, is_public)
    else:
        key = transfer_ecc_key(family, data["key"], source, target, is_public)
    return {"key": key}


def cmd_parse_key(data: dict) -> dict:
    """Detect the shape of a key string."""
    if data.get("family") == "rsa":
        info = parse_rsa(data["key"])
        return {
            "keySize": info.key_size,
            "encoding": info.encoding.value,
            "format": info.format.value,
            "pkcs": info.pkcs.value,
        }
    info = parse_ecc(data["key"])
    return {
        "curve": info.curve.value,
        "encoding": info.encoding.value,
        "format": info.format.value,
        "pkcs": info.pkcs.value,
    }


def cmd_aes(data: dict) -> dict:
    """Run AES encryption or decryption."""
    request = AesRequest(
        mode=data["mode"],
        padding=data["padding"],
        key=data["key"],
        input=data["input"],
        for_encryption=data["forEncryption"],
        iv=data.get("iv"),
        aad=data.get("aad"),
        key_encoding=data.get("keyEncoding", "base64"),
        input_encoding=data.get("inputEncoding", "utf8"),
        iv_encoding=data.get("ivEncoding", "base64"),
        aad_encoding=data.get("aadEncoding", "utf8"),
        output_encoding=data.get("outputEncoding", "base64"),
    )
    return {"output": aes_crypto(request)}


def cmd_generate_aes(data: dict) -> dict:
    """Generate an AES key and a matching IV or nonce."""
    encoding = data.get("encoding", "base64")
    return {
        "key": generate_aes(data.get("keySize", 256), encoding),
        "iv": generate_iv(data.get("mode", "GCM"), encoding),
    }


def cmd_rsa(data: dict) -> dict:
    """Run RSA encryption or decryption."""
    request = RsaRequest(
        key=data["key"],
        pkcs=data["pkcs"],
        format=data["format"],
        padding=data["padding"],
        input=data["input"],
        for_encryption=data["forEncryption"],
        digest=data.get("digest"),
        mgf_digest=data.get("mgfDigest"),
        key_encoding=data.get("keyEncoding", "utf8"),
        input_encoding=data.get("inputEncoding", "utf8"),
        output_encoding=data.get("outputEncoding", "base64"),
    )
    return {"output": rsa_crypto(request)}


def cmd_ecies(data: dict) -> dict:
    """Run ECIES encryption or decryption."""
    request = EciesRequest(
        curve=data["curve"],
        key=data["key"],
        pkcs=data["pkcs"],
        format=data["format"],
        input=data["input"],
        for_encryption=data["forEncryption"],
        kdf=data.get("kdf", "pbkdf2"),
        digest=data.get("digest", "sha512"),
        algorithm=data.get("algorithm", "AES-GCM"),
        salt=data.get("salt"),
        info=data.get("info"),
        aad=data.get("aad"),
        key_encoding=data.get("keyEncoding", "utf8"),
        input_encoding=data.get("inputEncoding", "utf8"),
        salt_encoding=data.get("saltEncoding", "utf8"),
        info_encoding=data.get("infoEncoding", "utf8"),
        aad_encoding=data.get("aadEncoding", "utf8"),
        output_encoding=data.get("outputEncoding", "base64"),
    )
    return {"output": ecies(request)}


def cmd_kdf(data: dict) -> dict:
    """Derive a key."""
    request = KdfRequest(
        kdf=data["kdf"],
        digest=data["digest"],
        input=data["input"],
        length=data["length"],
        salt=data.get("salt"),
        info=data.get("info"),
        input_encoding=data.get("inputEncoding", "utf8"),
        salt_encoding=data.get("saltEncoding", "utf8"),
        info_encoding=data.get("infoEncoding", "utf8"),
        output_encoding=data.get("outputEncoding", "base64"),
    )
    return {"output": kdf(request)}


def cmd_convert(data: dict) -> dict:
    """Re-encode text between Base64, hex and UTF-8."""
    output = convert_encoding(
        data["input"], data["from"], data["to"], uppercase=data.get("uppercase", False)
    )
    return {"output": output}


COMMANDS = {
    "generate-rsa": cmd_generate_rsa,
    "generate-ecc": cmd_generate_ecc,
    "generate-edwards": cmd_generate_edwards,
    "transfer-key": cmd_transfer_key,
    "parse-key": cmd_parse_key,
    "aes": cmd_aes,
    "generate-aes": cmd_generate_aes,
    "rsa": cmd_rsa,
    "ecies": cmd_ecies,
    "kdf": cmd_kdf,
    "convert": cmd_convert,
}


def main() -> None:
    """Main entry point."""
    if len(sys.argv) < 2:
        print("usage: testhelper.py <command> < request.json", file=sys.stderr)
        sys.exit(1)

    command = sys.argv[1]
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"unknown command: {command}", file=sys.stderr)
        sys.exit(1)

    raw = sys.stdin.read()
    data = json.loads(raw) if raw.strip() else {}

    try:
        output = handler(data)
    except CryptoKitsError as e:
        print(json.dumps({"error": type(e).__name__, "message": str(e)}))
        sys.exit(2)

    print(json.dumps(output))


if __name__ == "__main__":
    main()
