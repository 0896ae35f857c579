# common/__init__.py
# -*- coding: utf-8 -*-
"""
Command execution, logging and host-state helpers shared by the provisioner.
"""
