import os
from setuptools import setup
import finix_gateway

README = open(os.path.join(os.path.dirname(__file__), 'README.rst')).read()
REQUIREMENTS = [
    line.strip() for line in open(os.path.join(os.path.dirname(__file__),
                                               'requirements.txt')).readlines()
    if line.strip()]
TEST_REQUIREMENTS = [
    'httpretty>=1.1',
    'pytest',
    # httpretty 1.1.x cannot mock socket.shutdown used by urllib3>=2.3
    'urllib3<2.3',
]

setup(
    name='finix-gateway',
    version=finix_gateway.__version__,
    packages=['finix_gateway'],
    include_package_data=True,
    license='Apache 2.0',
    description='Finix payments API client for storefront integrations',
    long_description=README,
    long_description_content_type='text/x-rst',
    keywords=['api', 'finix', 'payments', 'woocommerce', 'apple pay', 'client'],
    install_requires=REQUIREMENTS,
    extras_require={'test': TEST_REQUIREMENTS},
    python_requires='>=3.8',
    classifiers=[
          'Intended Audience :: Developers',
          'Operating System :: OS Independent',
          'Programming Language :: Python :: 3',
          'Programming Language :: Python :: 3 :: Only',
          'Programming Language :: Python',
          'Topic :: Office/Business :: Financial',
          'Topic :: Software Development :: Libraries :: Python Modules',
    ],
)
