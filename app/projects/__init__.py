"""
Projects app: marketplace projects, applications and the commitment workflow.

A client posts a project, freelancers apply (each application opens a
discussion chat), the client commits to one freelancer, and the project
runs to completion or cancellation. See projects.services.
"""
