import os
from pathlib import Path

import pulumi
import pulumi_aws as aws
import pulumi_tls as tls


def write_private_key(path: str, key_material: str) -> str:
    """
    Writes private key material to a local file readable only by the owner.

    Args:
        path: Destination file, "~" is expanded.
        key_material: PEM or OpenSSH encoded private key.

    Returns:
        The absolute path of the written file.
    """
    key_path = Path(path).expanduser().resolve()
    key_path.parent.mkdir(parents=True, exist_ok=True)

    # O_CREAT only applies the mode to new files
    fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as key_file:
        key_file.write(key_material)
    os.chmod(key_path, 0o600)

    return str(key_path)


class GeneratedKeyPair(pulumi.ComponentResource):
    """
    Generates an RSA private key locally and registers its public half as an EC2 key pair.
    """

    def __init__(self, name: str, args: dict, opts: pulumi.ResourceOptions = None):
        """
        Creates a private key, an EC2 key pair and optionally a local key file.

        Args:
            name: The unique name of the resource.
            args: Dictionary containing configuration options:
                - key_name: Name of the EC2 key pair (required)
                - rsa_bits: RSA key size (default: 4096)
                - key_file: Local path the private key is written to (default: "id_rsa")
                - key_format: "openssh" or "pem" (default: "openssh")
                - write_private_key: Write the private key to key_file (default: True)
                - tags: Dictionary of tags to apply (optional)
            opts: Additional resource options.
        """
        super().__init__("custom:security:GeneratedKeyPair", name, {}, opts)

        key_name = args.get("key_name")
        if not key_name:
            raise ValueError("key_name is required")

        rsa_bits = args.get("rsa_bits", 4096)
        key_file = args.get("key_file", "id_rsa")
        key_format = args.get("key_format", "openssh")
        write_key = args.get("write_private_key", True)
        tags = args.get("tags", {})

        if key_format not in ("openssh", "pem"):
            raise ValueError(f"key_format must be 'openssh' or 'pem', got {key_format!r}")

        self.private_key = tls.PrivateKey(
            f"{name}-private-key",
            algorithm="RSA",
            rsa_bits=rsa_bits,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.key_pair = aws.ec2.KeyPair(
            f"{name}-key-pair",
            key_name=key_name,
            public_key=self.private_key.public_key_openssh,
            tags={**tags, "Name": key_name},
            opts=pulumi.ResourceOptions(parent=self),
        )

        key_material = (
            self.private_key.private_key_openssh
            if key_format == "openssh"
            else self.private_key.private_key_pem
        )

        # Resolves to None when nothing was written (disabled or preview)
        self.key_file = None
        if write_key:
            self.key_file = pulumi.Output.unsecret(
                key_material.apply(lambda material: self._save(key_file, material))
            )

        outputs = {
            "key_name": self.key_pair.key_name,
            "key_pair_id": self.key_pair.id,
            "fingerprint": self.key_pair.fingerprint,
        }
        if self.key_file is not None:
            outputs["key_file"] = self.key_file

        self.register_outputs(outputs)

    @staticmethod
    def _save(key_file: str, material: str):
        if pulumi.runtime.is_dry_run() or not material:
            return None
        written = write_private_key(key_file, material)
        pulumi.log.warn(f"Private key written unencrypted to {written}")
        return written
