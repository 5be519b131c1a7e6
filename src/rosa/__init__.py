"""ROSA CLI.

Create, list and delete resources of Red Hat OpenShift Service on AWS clusters.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
