# SPDX-License-Identifier: Apache-2.0
"""
freno client tests

Tests for the freno HTTP client, its request decoration pipeline and the
throttler built on top of it. No test reaches the network: requests are
answered by an httpx.MockTransport route table (see tests/mock/mock_freno.py).
"""
