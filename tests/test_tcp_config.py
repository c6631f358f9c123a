import pytest

from spongetcp.tcp_config import Endpoint, FdAdapterConfig, TCPConfig


def test_tcp_config_defaults():
    cfg = TCPConfig()
    assert cfg.rt_timeout == 1000
    assert cfg.recv_capacity == 64000
    assert cfg.send_capacity == cfg.recv_capacity
    assert cfg.fixed_isn is None


def test_tcp_config_override():
    cfg = TCPConfig(recv_capacity=65000, rt_timeout=100)
    assert cfg.recv_capacity == 65000
    assert cfg.rt_timeout == 100
    assert cfg.send_capacity == TCPConfig.DEFAULT_CAPACITY


def test_ipv4_numeric_of_dns_server():
    assert Endpoint("18.71.0.151", 53).ipv4_numeric() == 0x12470097


def test_ipv4_numeric_of_any_address():
    assert Endpoint("0", 0).ipv4_numeric() == 0


def test_ipv4_numeric_rejects_bad_host():
    with pytest.raises(ValueError):
        Endpoint("not-an-address", 1).ipv4_numeric()


def test_port_out_of_range():
    with pytest.raises(ValueError):
        Endpoint("1.2.3.4", 70000)


def test_port_from_string():
    assert Endpoint("1.2.3.4", "80").port == 80


def test_endpoint_str():
    assert str(Endpoint("18.71.0.151", 53)) == "18.71.0.151:53"


def test_fd_adapter_config_defaults_independent():
    first = FdAdapterConfig()
    second = FdAdapterConfig()
    assert first.source == Endpoint("0", 0)
    assert first.destination == Endpoint("0", 0)
    first.destination = Endpoint("1.2.3.4", 5)
    assert second.destination == Endpoint("0", 0)
    assert (first.loss_rate_up, first.loss_rate_dn) == (0, 0)