"""
Transcode submission pipeline for Bitmovin.

Turns one canonical job into the Bitmovin resource graph:

    input -> output -> (manifest) -> encoding -> streams + muxings
          -> manifest media/stream infos -> start

Each step needs IDs from the ones before it, so steps run strictly in
order. The first failure aborts the submission with a SubmissionError
listing every vendor resource already created. Nothing is rolled back.
"""

import logging
import posixpath
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple
from urllib.parse import urlparse

from ...config import BitmovinConfig
from ...errors import CloudTranscodeError, InvalidProviderConfigError, JobValidationError, SubmissionError
from ...models import Job, JobStatus, Status, TranscodeOutput
from .client import BitmovinClient
from .links import EncodingLinks, PresetLinks
from .models import (
    Encoding,
    EncodingOutput,
    HLSManifest,
    HTTPInput,
    MediaInfo,
    MP4Muxing,
    MuxingStream,
    S3Input,
    S3Output,
    Stream,
    StreamInfo,
    StreamInput,
    TSMuxing,
)

logger = logging.getLogger(__name__)

MP4_CONTAINERS = ("mp4",)
HLS_CONTAINERS = ("m3u8", "hls")


@dataclass(frozen=True)
class SourceMedia:
    """Where the source file lives, split the way Bitmovin inputs want it."""
    scheme: str  # "s3", "http" or "https"
    location: str  # bucket name or host
    path: str


@dataclass(frozen=True)
class Destination:
    bucket: str
    prefix: str


@dataclass
class Rendition:
    output: TranscodeOutput
    file_name: str  # normalized, relative to the job folder
    video_config_id: str
    links: PresetLinks
    container: str
    video_stream_id: Optional[str] = None
    audio_stream_id: Optional[str] = None
    muxing_id: Optional[str] = None

    @property
    def is_hls(self) -> bool:
        return self.container in HLS_CONTAINERS


def parse_source(source_media: str) -> SourceMedia:
    """Split a job's source URI into scheme, bucket/host and path."""
    parsed = urlparse(source_media)
    scheme = parsed.scheme.lower()

    if scheme not in ("s3", "http", "https"):
        raise JobValidationError(f"unsupported source media scheme: {source_media!r}")
    if not parsed.netloc:
        raise JobValidationError(f"source media has no bucket or host: {source_media!r}")

    if scheme == "s3":
        path = parsed.path.lstrip("/")
    else:
        path = parsed.path
        if parsed.query:
            path = f"{path}?{parsed.query}"

    if not path.strip("/"):
        raise JobValidationError(f"source media has no file path: {source_media!r}")

    return SourceMedia(scheme=scheme, location=parsed.netloc, path=path)


def parse_destination(destination: str) -> Destination:
    """Split the configured ``s3://bucket/prefix/`` destination."""
    parsed = urlparse(destination)
    if parsed.scheme.lower() != "s3" or not parsed.netloc:
        raise InvalidProviderConfigError("bitmovin", f"destination must be an s3:// URI, got {destination!r}")
    return Destination(bucket=parsed.netloc, prefix=parsed.path.strip("/"))


def job_path(path: str) -> str:
    """
    Normalize an output path so it is relative to the job folder.

    A leading slash means the job folder itself, not the bucket root.

    Raises:
        JobValidationError: If the path is empty or climbs out of the job folder
    """
    normalized = posixpath.normpath(path.lstrip("/")) if path.strip("/") else ""
    if not normalized or normalized == "." or normalized == ".." or normalized.startswith("../"):
        raise JobValidationError(f"output path must name a file inside the job folder: {path!r}")
    return normalized


def _join(*parts: str) -> str:
    parts = tuple(p.strip("/") for p in parts if p and p.strip("/"))
    if not parts:
        return "/"
    return posixpath.normpath(posixpath.join(*parts))


class SubmissionPipeline:
    """Runs the submission saga. Holds no per-job state, so it can be shared."""

    def __init__(
        self,
        client: BitmovinClient,
        config: BitmovinConfig,
        provider_name: str,
        destination: Optional[Destination] = None,
    ):
        self.client = client
        self.config = config
        self.provider_name = provider_name
        self.destination = destination or parse_destination(config.destination)

    def run(self, job: Job) -> JobStatus:
        """Submit a job and return its QUEUED status."""
        return _Submission(self, job).execute()


class _Submission:
    """One pass of the pipeline for one job."""

    def __init__(self, pipeline: SubmissionPipeline, job: Job):
        self.client = pipeline.client
        self.config = pipeline.config
        self.provider_name = pipeline.provider_name
        self.destination = pipeline.destination
        self.job = job
        self.created: List[Tuple[str, str]] = []
        self.playlist = ""

    @contextmanager
    def _step(self, name: str) -> Iterator[None]:
        try:
            yield
        except SubmissionError:
            raise
        except CloudTranscodeError as e:
            logger.error(f"[Bitmovin] Submission of job {self.job.id} failed at {name}: {e}")
            raise SubmissionError(name, str(e), self.created) from e

    def _track(self, kind: str, resource_id: str) -> str:
        self.created.append((kind, resource_id))
        logger.debug(f"[Bitmovin] Created {kind} {resource_id}")
        return resource_id

    @property
    def output_root(self) -> str:
        return _join(self.destination.prefix, self.job.id)

    @property
    def playlist_dir(self) -> str:
        return posixpath.dirname(self.playlist)

    def _check_streaming_params(self) -> None:
        params = self.job.streaming_params
        if not params.playlist_file_name:
            raise JobValidationError("HLS outputs need a playlist file name")
        if params.segment_duration <= 0:
            raise JobValidationError(
                f"HLS outputs need a positive segment duration, got {params.segment_duration}"
            )

    def execute(self) -> JobStatus:
        job = self.job

        # Caller input is checked before any vendor resource exists
        source = parse_source(job.source_media)
        preset_ids = [output.preset.provider_preset_id(self.provider_name) for output in job.outputs]
        file_names = [job_path(output.file_name) for output in job.outputs]
        if job.streaming_params.playlist_file_name:
            self.playlist = job_path(job.streaming_params.playlist_file_name)
        if any(o.preset.output_opts.extension.lower() in HLS_CONTAINERS for o in job.outputs):
            self._check_streaming_params()

        logger.info(f"[Bitmovin] Submitting job {job.id} with {len(job.outputs)} outputs")

        with self._step("input"):
            input_id = self._create_input(source)

        with self._step("output"):
            output_id = self._track("output", self.client.create_s3_output(S3Output(
                access_key=self.config.access_key_id,
                secret_key=self.config.secret_access_key,
                bucket_name=self.destination.bucket,
                cloud_region=self.config.aws_storage_region,
            )))

        with self._step("renditions"):
            renditions = [
                self._resolve_rendition(output, file_name, preset_id)
                for output, file_name, preset_id in zip(job.outputs, file_names, preset_ids)
            ]
        hls_renditions = [r for r in renditions if r.is_hls]

        manifest_id = None
        if hls_renditions:
            with self._step("manifest"):
                # The preset link may turn an output into HLS after the early check
                self._check_streaming_params()
                manifest_id = self._create_manifest(output_id)

        with self._step("encoding"):
            encoding_id = self._track("encoding", self.client.create_encoding(Encoding(
                name=f"encoding-{job.id}" if job.id else None,
                cloud_region=self.config.encoding_region,
                custom_data=EncodingLinks(manifest_id=manifest_id).to_custom_data() or None,
            )))

        for index, rendition in enumerate(renditions):
            with self._step(f"rendition {index} ({rendition.file_name})"):
                self._wire_rendition(encoding_id, input_id, source, output_id, rendition)

        if manifest_id is not None:
            with self._step("manifest assembly"):
                for index, rendition in enumerate(hls_renditions):
                    self._add_manifest_entries(manifest_id, encoding_id, index, rendition)

        with self._step("start"):
            self.client.start_encoding(encoding_id)

        logger.info(f"[Bitmovin] Job {job.id} queued as encoding {encoding_id}")
        return JobStatus(
            provider_name=self.provider_name,
            provider_job_id=encoding_id,
            status=Status.QUEUED,
        )

    # =========================================================================
    # STEPS
    # =========================================================================

    def _create_input(self, source: SourceMedia) -> str:
        if source.scheme == "s3":
            input_id = self.client.create_s3_input(S3Input(
                access_key=self.config.access_key_id,
                secret_key=self.config.secret_access_key,
                bucket_name=source.location,
                cloud_region=self.config.aws_storage_region,
            ))
            return self._track("s3 input", input_id)

        input_id = self.client.create_http_input(HTTPInput(host=source.location), scheme=source.scheme)
        return self._track(f"{source.scheme} input", input_id)

    def _resolve_rendition(self, output: TranscodeOutput, file_name: str, preset_id: str) -> Rendition:
        links = PresetLinks.from_custom_data(self.client.get_h264_custom_data(preset_id))
        container = (links.container or output.preset.output_opts.extension).lower()

        if container not in MP4_CONTAINERS + HLS_CONTAINERS:
            raise JobValidationError(
                f"preset {output.preset.name!r} has unsupported container {container!r}"
            )

        return Rendition(
            output=output,
            file_name=file_name,
            video_config_id=preset_id,
            links=links,
            container=container,
        )

    def _create_manifest(self, output_id: str) -> str:
        playlist = self.playlist
        manifest_id = self.client.create_hls_manifest(HLSManifest(
            name=posixpath.basename(playlist),
            manifest_name=posixpath.basename(playlist),
            outputs=[EncodingOutput(
                output_id=output_id,
                output_path=_join(self.output_root, self.playlist_dir),
            )],
        ))
        return self._track("hls manifest", manifest_id)

    def _add_stream(self, encoding_id: str, input_id: str, source: SourceMedia, codec_config_id: str) -> str:
        stream_id = self.client.add_stream(encoding_id, Stream(
            codec_config_id=codec_config_id,
            input_streams=[StreamInput(input_id=input_id, input_path=source.path)],
        ))
        return self._track("stream", stream_id)

    def _wire_rendition(
        self,
        encoding_id: str,
        input_id: str,
        source: SourceMedia,
        output_id: str,
        rendition: Rendition,
    ) -> None:
        rendition.video_stream_id = self._add_stream(encoding_id, input_id, source, rendition.video_config_id)
        muxing_streams = [MuxingStream(stream_id=rendition.video_stream_id)]

        if rendition.links.audio_config_id:
            rendition.audio_stream_id = self._add_stream(
                encoding_id, input_id, source, rendition.links.audio_config_id
            )
            muxing_streams.append(MuxingStream(stream_id=rendition.audio_stream_id))

        file_name = rendition.file_name
        if rendition.is_hls:
            muxing_id = self.client.add_ts_muxing(encoding_id, TSMuxing(
                segment_length=float(self.job.streaming_params.segment_duration),
                streams=muxing_streams,
                outputs=[EncodingOutput(
                    output_id=output_id,
                    output_path=_join(self.output_root, self.playlist_dir, self._segment_dir(file_name)),
                )],
            ))
            rendition.muxing_id = self._track("ts muxing", muxing_id)
        else:
            muxing_id = self.client.add_mp4_muxing(encoding_id, MP4Muxing(
                filename=posixpath.basename(file_name),
                streams=muxing_streams,
                outputs=[EncodingOutput(
                    output_id=output_id,
                    output_path=_join(self.output_root, posixpath.dirname(file_name)),
                )],
            ))
            rendition.muxing_id = self._track("mp4 muxing", muxing_id)

    def _variant_uri(self, file_name: str) -> str:
        """
        Path of a rendition's playlist relative to the master playlist.

        Both paths are already relative to the job folder, so this never
        depends on the process working directory.
        """
        file_parts = file_name.split("/")
        dir_parts = self.playlist_dir.split("/") if self.playlist_dir else []

        common = 0
        while (
            common < len(dir_parts)
            and common < len(file_parts) - 1
            and file_parts[common] == dir_parts[common]
        ):
            common += 1

        return "/".join([".."] * (len(dir_parts) - common) + file_parts[common:])

    def _segment_dir(self, file_name: str) -> str:
        return posixpath.splitext(self._variant_uri(file_name))[0]

    def _add_manifest_entries(self, manifest_id: str, encoding_id: str, index: int, rendition: Rendition) -> None:
        file_name = rendition.file_name
        uri = self._variant_uri(file_name)
        segment_dir = self._segment_dir(file_name)

        if rendition.audio_stream_id:
            group_id = f"audio_{index}"
            media_type = "AUDIO"
            media_stream_id = rendition.audio_stream_id
        else:
            group_id = f"video_{index}"
            media_type = "VIDEO"
            media_stream_id = rendition.video_stream_id

        media_id = self.client.add_media_info(manifest_id, MediaInfo(
            type=media_type,
            group_id=group_id,
            name=rendition.output.preset.name,
            segment_path=segment_dir,
            uri=f"{segment_dir}_{media_type.lower()}.m3u8",
            encoding_id=encoding_id,
            stream_id=media_stream_id,
            muxing_id=rendition.muxing_id,
        ))
        self._track("hls media info", media_id)

        stream_info_id = self.client.add_stream_info(manifest_id, StreamInfo(
            audio=group_id if rendition.audio_stream_id else None,
            segment_path=segment_dir,
            uri=uri,
            encoding_id=encoding_id,
            stream_id=rendition.video_stream_id,
            muxing_id=rendition.muxing_id,
        ))
        self._track("hls stream info", stream_info_id)
