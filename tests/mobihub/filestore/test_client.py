import os, tempfile, logging
import unittest as test
from unittest.mock import patch, Mock
from pathlib import Path
import requests

from mobihub.filestore.client import FileStorageClient
from mobihub.filestore.auth import BasicAuthenticator
from mobihub.filestore.share import ShareLink
from mobihub.filestore.exceptions import *
from mobihub.base.config import ConfigurationException, load_from_file

execdir = Path(__file__).parents[0]
datadir = execdir / 'data'
tmpdir = tempfile.TemporaryDirectory(prefix="_test_client.")
loghdlr = None
rootlog = None

def setUpModule():
    global loghdlr
    global rootlog
    rootlog = logging.getLogger()
    loghdlr = logging.FileHandler(os.path.join(tmpdir.name, "test_client.log"))
    loghdlr.setLevel(logging.DEBUG)
    rootlog.addHandler(loghdlr)

def tearDownModule():
    global loghdlr
    if loghdlr:
        if rootlog:
            rootlog.removeHandler(loghdlr)
        loghdlr.flush()
        loghdlr.close()
        loghdlr = None
    tmpdir.cleanup()

baseurl = "https://cloud.example.com"
davfiles = baseurl + "/remote.php/dav/files/mobihub_svc/"

def mock_response(status, text=""):
    resp = Mock()
    resp.status_code = status
    resp.text = text
    return resp

def make_file(name, size):
    path = os.path.join(tmpdir.name, name)
    with open(path, 'wb') as fd:
        fd.write(b'z' * size)
    return path

class TestFileStorageClient(test.TestCase):

    def setUp(self):
        self.auth = BasicAuthenticator("mobihub_svc", "s3cr3t")
        self.session = Mock(spec=requests.Session)
        self.session.request.return_value = mock_response(201)
        self.cli = FileStorageClient(baseurl, self.auth, self.session)

    def test_ctor(self):
        self.assertEqual(self.cli.base_url, baseurl)
        self.assertIs(self.cli.session, self.session)
        self.assertFalse(self.cli._owns_session)
        self.assertEqual(self.cli.chunked_threshold, 10000000)
        self.assertEqual(self.cli.chunked_uploader.chunk_size, 10000000)
        self.assertEqual(self.cli.simple_uploader.max_size, 10000000)
        for comp in (self.cli.simple_uploader, self.cli.chunked_uploader,
                     self.cli.downloader, self.cli.remover):
            self.assertIs(comp.session, self.session)
            self.assertIs(comp.auth, self.auth)

        with self.assertRaises(ValueError):
            FileStorageClient(baseurl, self.auth, self.session, chunk_size=1000)
        with self.assertRaises(ValueError):
            FileStorageClient(baseurl, self.auth, self.session, chunked_threshold=12000000)
        with self.assertRaises(ValueError):
            FileStorageClient(baseurl, self.auth, self.session, simple_upload_limit=9000000)

    def test_upload_dispatch(self):
        cli = FileStorageClient(baseurl, self.auth, self.session, chunked_threshold=100)
        small = make_file("small.zip", 100)
        large = make_file("large.zip", 101)

        with patch.object(cli.simple_uploader, 'upload') as simple, \
             patch.object(cli.chunked_uploader, 'upload') as chunked:
            cli.upload(small, "a/small.zip")
            simple.assert_called_once_with(small, "a/small.zip")
            chunked.assert_not_called()

            cli.upload(large, "a/large.zip")
            chunked.assert_called_once_with(large, "a/large.zip")
            self.assertEqual(simple.call_count, 1)

            missing = os.path.join(tmpdir.name, "goob.zip")
            cli.upload(missing, "a/goob.zip")
            simple.assert_called_with(missing, "a/goob.zip")
            self.assertEqual(chunked.call_count, 1)

        self.session.request.assert_not_called()

    def test_upload_threshold(self):
        path = make_file("tiny.zip", 10)
        with patch.object(self.cli.simple_uploader, 'upload') as simple, \
             patch.object(self.cli.chunked_uploader, 'upload') as chunked, \
             patch('os.path.getsize', return_value=10000000):
            self.cli.upload(path, "tiny.zip")
            simple.assert_called_once()
            chunked.assert_not_called()

        with patch.object(self.cli.simple_uploader, 'upload') as simple, \
             patch.object(self.cli.chunked_uploader, 'upload') as chunked, \
             patch('os.path.getsize', return_value=10000001):
            self.cli.upload(path, "tiny.zip")
            chunked.assert_called_once()
            simple.assert_not_called()

    def test_upload_chunked(self):
        path = make_file("model.zip", 10200000)
        self.cli.upload(path, "a/b/c/model.zip")
        calls = self.session.request.call_args_list
        self.assertEqual([c[0][0] for c in calls],
                         ["MKCOL", "MKCOL", "MKCOL", "MKCOL", "PUT", "PUT", "MOVE"])

    def test_upload_empty(self):
        path = make_file("empty.zip", 0)
        with self.assertRaises(InvalidLocalFile):
            self.cli.upload(path, "a/b/c/empty.zip")
        with self.assertRaises(InvalidLocalFile):
            self.cli.upload(os.path.join(tmpdir.name, "goob.zip"), "a/b/c/goob.zip")
        self.session.request.assert_not_called()

    def test_remove(self):
        self.session.request.return_value = mock_response(404)
        self.cli.remove("a/model.zip")
        self.session.request.assert_called_once_with("DELETE", davfiles+"a/model.zip",
                                                     auth=self.auth)

    def test_download_reference(self):
        link = ShareLink("xXGaHeGNmSQkCtn", "/a/model.zip")
        with patch.object(self.cli.downloader, 'get_download_reference', return_value=link) as gdr:
            self.assertIs(self.cli.get_download_reference("a/model.zip", True), link)
            gdr.assert_called_once_with("a/model.zip", True)

        self.assertEqual(self.cli.share_url(link),
                         baseurl + "/s/xXGaHeGNmSQkCtn/download/model.zip")

    def test_download(self):
        with patch.object(self.cli.downloader, 'download_file', return_value="/tmp/file-x.zip") as dl:
            self.assertEqual(self.cli.download("a/model.zip"), "/tmp/file-x.zip")
            dl.assert_called_once_with("a/model.zip")

    def test_close(self):
        with FileStorageClient(baseurl, self.auth, self.session) as cli:
            pass
        self.session.close.assert_not_called()

        cli = FileStorageClient(baseurl, self.auth)
        self.assertTrue(cli._owns_session)
        self.assertTrue(isinstance(cli.session, requests.Session))
        with patch.object(cli.session, 'close') as close:
            with cli:
                pass
            close.assert_called_once()


class TestFromConfig(test.TestCase):

    def setUp(self):
        self.config = {
            "service_endpoint": baseurl + "/",
            "authentication": { "user": "mobihub_svc", "pass": "s3cr3t" }
        }

    def test_defaults(self):
        with FileStorageClient.from_config(self.config) as cli:
            self.assertEqual(cli.base_url, baseurl)
            self.assertTrue(cli._owns_session)
            self.assertTrue(cli.session.verify)
            self.assertEqual(cli.remover.auth, BasicAuthenticator("mobihub_svc", "s3cr3t"))
            self.assertEqual(cli.remover.file_url("a/b.zip"), davfiles+"a/b.zip")
            self.assertEqual(cli.chunked_uploader.chunk_size, 10000000)
            self.assertIsNone(cli.remover.timeout)
            self.assertIsNone(cli.downloader.download_dir)

    def test_params(self):
        self.config.update({
            "chunk_size": "6000000",
            "chunked_threshold": 8000000,
            "simple_upload_limit": 8000000,
            "timeout": "30",
            "download_dir": tmpdir.name,
            "dav_path": "/dav/",
            "ca_bundle": "/etc/ssl/ca.crt"
        })
        with FileStorageClient.from_config(self.config) as cli:
            self.assertEqual(cli.chunked_uploader.chunk_size, 6000000)
            self.assertEqual(cli.chunked_threshold, 8000000)
            self.assertEqual(cli.simple_uploader.max_size, 8000000)
            self.assertEqual(cli.remover.timeout, 30.0)
            self.assertEqual(cli.downloader.download_dir, tmpdir.name)
            self.assertEqual(cli.remover.dav_url, baseurl+"/dav")
            self.assertEqual(cli.session.verify, "/etc/ssl/ca.crt")

        self.config['site_cert_verify'] = False
        with FileStorageClient.from_config(self.config) as cli:
            self.assertFalse(cli.session.verify)

    def test_from_file(self):
        cfg = load_from_file(str(datadir / "filestore-config.yml"))['services']['filestore']
        with FileStorageClient.from_config(cfg) as cli:
            self.assertEqual(cli.base_url, baseurl)
            self.assertEqual(cli.chunked_uploader.chunk_size, 6000000)
            self.assertEqual(cli.chunked_threshold, 8000000)
            self.assertEqual(cli.remover.timeout, 30.0)

    def test_bad_config(self):
        del self.config['service_endpoint']
        with self.assertRaises(ConfigurationException):
            FileStorageClient.from_config(self.config)

        self.config['service_endpoint'] = baseurl
        self.config['chunk_size'] = "10MB"
        with self.assertRaises(ConfigurationException):
            FileStorageClient.from_config(self.config)

        self.config['chunk_size'] = 4000000
        with self.assertRaises(ConfigurationException):
            FileStorageClient.from_config(self.config)

        self.config['chunk_size'] = 6000000
        self.config['chunked_threshold'] = 8000000
        self.config['simple_upload_limit'] = 7000000
        with self.assertRaises(ConfigurationException):
            FileStorageClient.from_config(self.config)

        del self.config['chunk_size']
        del self.config['chunked_threshold']
        del self.config['simple_upload_limit']
        del self.config['authentication']
        with self.assertRaises(ConfigurationException):
            FileStorageClient.from_config(self.config)


if __name__ == '__main__':
    test.main()
