# provisioning/__init__.py
# -*- coding: utf-8 -*-
"""
One-time provisioning of the solana service account on a Linux host.
"""
