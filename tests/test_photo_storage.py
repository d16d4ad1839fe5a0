import io
import unittest
from unittest.mock import MagicMock

from botocore.exceptions import ClientError

from app.services.exceptions import PhotoStorageError, UnsupportedPhotoTypeError
from app.services.photo_storage import PhotoStorage


class TestPhotoStorage(unittest.TestCase):
    def setUp(self):
        self.s3 = MagicMock()
        self.storage = PhotoStorage(s3_client=self.s3)

    def test_upload_places_photo_under_folder(self):
        photo = self.storage.upload(io.BytesIO(b"img"), "Me.JPG", folder="users")

        args, kwargs = self.s3.upload_fileobj.call_args
        _, bucket, key = args
        self.assertEqual(bucket, self.storage.bucket_name)
        self.assertTrue(key.startswith("cake_order/users/"))
        self.assertTrue(key.endswith(".jpg"))
        self.assertEqual(kwargs["ExtraArgs"], {"ContentType": "image/jpeg"})
        self.assertEqual(photo.public_id, key)
        self.assertTrue(photo.secure_url.endswith(key))

    def test_rejects_unsupported_files(self):
        with self.assertRaises(UnsupportedPhotoTypeError):
            self.storage.upload(io.BytesIO(b"#!/bin/sh"), "run.sh", folder="users")
        self.s3.upload_fileobj.assert_not_called()

    def test_s3_errors_are_wrapped(self):
        self.s3.delete_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject"
        )
        with self.assertRaises(PhotoStorageError):
            self.storage.destroy("cake_order/users/old.png")


if __name__ == "__main__":
    unittest.main()
