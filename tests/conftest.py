"""
测试夹具：本地CA、证书和TLS服务器
"""
import ipaddress
import socket
import ssl
import threading
from datetime import datetime, timezone, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

LOCALHOST = "127.0.0.1"


def _name(common_name):
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def _key_usage(ca):
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=ca,
        crl_sign=ca,
        encipher_only=False,
        decipher_only=False,
    )


class CertificateFactory:
    """生成测试CA和服务器证书"""

    def __init__(self, directory):
        self.directory = directory
        self.ca_key = ec.generate_private_key(ec.SECP256R1())
        now = datetime.now(timezone.utc)
        self.ca_cert = (
            x509.CertificateBuilder()
            .subject_name(_name("Test Root CA"))
            .issuer_name(_name("Test Root CA"))
            .public_key(self.ca_key.public_key())
            .serial_number(1)
            .not_valid_before(now - timedelta(days=1))
            .not_valid_after(now + timedelta(days=3650))
            .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
            .add_extension(_key_usage(ca=True), critical=True)
            .add_extension(x509.SubjectKeyIdentifier.from_public_key(self.ca_key.public_key()), critical=False)
            .sign(self.ca_key, hashes.SHA256())
        )
        self.ca_path = directory / "ca.pem"
        self.ca_path.write_bytes(self.ca_cert.public_bytes(serialization.Encoding.PEM))

    def client_context(self):
        """只信任测试CA的客户端上下文"""
        return ssl.create_default_context(cafile=str(self.ca_path))

    def issue(self, name, not_after, serial_number=1000, not_before=None, self_signed=False,
              alt_names=("localhost", LOCALHOST)):
        """
        签发服务器证书，返回 (证书路径, 私钥路径)
        """
        key = ec.generate_private_key(ec.SECP256R1())
        general_names = []
        for alt_name in alt_names:
            try:
                general_names.append(x509.IPAddress(ipaddress.ip_address(alt_name)))
            except ValueError:
                general_names.append(x509.DNSName(alt_name))
        if not_before is None:
            not_before = datetime.now(timezone.utc) - timedelta(days=1)

        if self_signed:
            issuer_name, signing_key = _name(name), key
            authority_key_id = x509.AuthorityKeyIdentifier.from_issuer_public_key(key.public_key())
        else:
            issuer_name, signing_key = self.ca_cert.subject, self.ca_key
            authority_key_id = x509.AuthorityKeyIdentifier.from_issuer_public_key(self.ca_key.public_key())

        cert = (
            x509.CertificateBuilder()
            .subject_name(_name(name))
            .issuer_name(issuer_name)
            .public_key(key.public_key())
            .serial_number(serial_number)
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(x509.SubjectAlternativeName(general_names), critical=False)
            .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
            .add_extension(_key_usage(ca=False), critical=True)
            .add_extension(x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]), critical=False)
            .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
            .add_extension(authority_key_id, critical=False)
            .sign(signing_key, hashes.SHA256())
        )

        cert_path = self.directory / f"{name}-{serial_number}.pem"
        key_path = self.directory / f"{name}-{serial_number}.key"
        cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
        key_path.write_bytes(key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ))
        return cert_path, key_path


class TLSServer:
    """在本地端口上完成TLS握手后立即关闭连接的服务器"""

    def __init__(self, cert_path, key_path):
        self.context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        self.context.load_cert_chain(str(cert_path), str(key_path))
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind((LOCALHOST, 0))
        self.sock.listen(8)
        self.sock.settimeout(0.2)
        self.port = self.sock.getsockname()[1]
        self.connections = 0
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def url(self):
        return f"https://{LOCALHOST}:{self.port}/"

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self.sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            self.connections += 1
            conn.settimeout(5)
            try:
                with self.context.wrap_socket(conn, server_side=True):
                    pass
            except (ssl.SSLError, OSError):
                # 客户端拒绝证书时握手失败
                conn.close()

    def __enter__(self):
        self._thread.start()
        return self

    def __exit__(self, *exc_info):
        self._stop.set()
        self._thread.join(timeout=5)
        self.sock.close()


@pytest.fixture
def cert_factory(tmp_path):
    return CertificateFactory(tmp_path)


@pytest.fixture
def tls_server(cert_factory):
    """启动使用给定证书的TLS服务器"""
    servers = []

    def start(name="localhost", expires_in=timedelta(days=90), **kwargs):
        not_after = datetime.now(timezone.utc) + expires_in
        cert_path, key_path = cert_factory.issue(name, not_after, **kwargs)
        server = TLSServer(cert_path, key_path).__enter__()
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.__exit__(None, None, None)


@pytest.fixture
def unresponsive_address():
    """
    返回一个接受队列已满的本地地址，新的TCP连接不会完成握手
    """
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind((LOCALHOST, 0))
    listener.listen(0)
    address = listener.getsockname()

    fillers = []
    for _ in range(4):
        filler = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        filler.setblocking(False)
        filler.connect_ex(address)
        fillers.append(filler)

    yield address

    for filler in fillers:
        filler.close()
    listener.close()
